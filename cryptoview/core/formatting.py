from datetime import datetime


def format_price(price: float) -> str:
    magnitude = abs(price)
    if magnitude >= 100:
        return f'{price:,.2f}'
    if magnitude >= 1:
        return f'{price:,.4f}'
    if magnitude >= 0.01:
        return f'{price:,.6f}'
    if magnitude >= 0.0001:
        return f'{price:,.8f}'
    if magnitude == 0:
        return '0.00'
    return f'{price:,.10f}'


def format_timestamp(ts: float, unit: str = 's') -> str:
    seconds = ts / 1000.0 if unit == 'ms' else ts
    try:
        return datetime.fromtimestamp(seconds).strftime('%Y-%m-%d %H:%M:%S')
    except (OverflowError, OSError, ValueError):
        return str(ts)
