from slugify import slugify


def derive_slug(order_number: int, title: str) -> str:
    return slugify(f"{order_number} {title}", lowercase=True)
