import asyncio
from functools import partial


async def run_blocking(fn, *args, **kwargs):
    """
    Run blocking SDK calls (gspread, smtplib) safely in async code.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        partial(fn, *args, **kwargs)
    )
