#!/usr/bin/env python3
"""
SSE watch script
Print live change events of one restaurant

Usage:
    TOKEN=<operator or staff token> python script/watch_stream.py
"""

import asyncio
import os

import httpx
import orjson


BASE_URL = os.getenv('BASE_URL', 'http://localhost:8000')
MAX_EVENTS = int(os.getenv('MAX_EVENTS', '10'))


async def watch_stream() -> None:
    url = f'{BASE_URL}/api/reservations/stream'
    headers = {'Authorization': f'Bearer {os.environ["TOKEN"]}'}

    print(f'🔗 Connecting to SSE stream: {url}')
    print('=' * 80)

    async with httpx.AsyncClient(timeout=None) as client:
        async with client.stream('GET', url, headers=headers) as response:
            print(f'✅ Connected! Status: {response.status_code}')
            print('📊 Receiving change events (Ctrl+C to stop)...')
            print('=' * 80)

            event_count = 0
            async for line in response.aiter_lines():
                if not line.startswith('data: '):
                    continue
                event_count += 1
                try:
                    event = orjson.loads(line[6:])
                except orjson.JSONDecodeError:
                    print(f'⚠️  Event #{event_count}: Invalid JSON')
                    continue

                print(
                    f'📦 Event #{event_count}: {event.get("event_type")} '
                    f'date={event.get("date")} slot={event.get("slot_id")}'
                )
                if event_count >= MAX_EVENTS:
                    print('\n' + '=' * 80)
                    print(f'🎉 Received {event_count} events')
                    break


if __name__ == '__main__':
    try:
        asyncio.run(watch_stream())
    except KeyboardInterrupt:
        print('\n🛑 Stopped by user')
