from __future__ import annotations

import argparse
import asyncio
import logging

logger = logging.getLogger("echo_server")


async def _handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    peer = writer.get_extra_info("peername")
    try:
        data = await reader.read(65536)
        logger.info("peer=%s received=%r", peer, data)
        if data:
            writer.write(data)
            await writer.drain()
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except Exception:  # noqa: BLE001
            pass


async def _run(args: argparse.Namespace) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    server = await asyncio.start_server(_handle, args.host, args.port)
    for sock in server.sockets:
        logger.info("listening on %s", sock.getsockname())
    async with server:
        await server.serve_forever()
    return 0


def main() -> int:
    p = argparse.ArgumentParser(description="Echo one read back to each client, then close.")
    p.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    p.add_argument("--port", type=int, default=50000, help="Bind port")
    args = p.parse_args()
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
