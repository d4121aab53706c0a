"""List registered algorithms."""

import typer

from ..recommend.algorithms import DEFAULT_ALGORITHM, FALLBACK_ALGORITHM, available_algorithms


def algorithms() -> None:
    for name in available_algorithms():
        tags = []
        if name == DEFAULT_ALGORITHM:
            tags.append("default")
        if name == FALLBACK_ALGORITHM:
            tags.append("fallback")
        suffix = f" ({', '.join(tags)})" if tags else ""
        typer.echo(f"{name}{suffix}")


__all__ = ["algorithms"]
