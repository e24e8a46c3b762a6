import asyncio
import logging
import sys

from svcutils.errors import SendError
from svcutils.http import HyperClient


def result_str(url: str, status: int, text: str) -> str:
    sep = '-------------------------'
    body = text if len(text) <= 500 else f'{text[:500]}...'
    return f'\n{sep}\nGET {url}\nstatus: {status}\n\n{body}\n{sep}'


async def main() -> int:
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) < 2:
        url = input('Enter a URL to fetch: ').strip()
    else:
        url = sys.argv[1].strip()

    exit_code = 1
    try:
        client = HyperClient.new_with_timeout(url, 250, 1000, 3)
        result = await client.get_with_params()
        print(result_str(client.url, result.status, result.text))
        exit_code = 0 if result.is_success else 1
    except ValueError as exc:
        print(f'Invalid URL: {exc}')
    except SendError as exc:
        print(f'Error fetching {url}, check your network connection: {exc}')

    return exit_code


if __name__ == '__main__':
    sys.exit(
        asyncio.run(main())
    )
