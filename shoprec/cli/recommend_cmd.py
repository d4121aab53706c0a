"""Recommend products command."""

from pathlib import Path

import typer
from loguru import logger

from ..config import AppConfig, AppConfigProvider, ConfigProvider, MappingConfigProvider, load_config
from ..const import ALGORITHM_ENV
from ..data_sources import fetch_training_data, load_training_data
from ..entities import OrderItem
from ..http import PersistenceError
from ..log import setup_logging
from ..recommend import NotTrainedError, RecommenderSelector, retrain


def _cart(product_ids: list[int]) -> list[OrderItem]:
    return [
        OrderItem(id=index, product_id=product_id, order_id=0, quantity=1)
        for index, product_id in enumerate(product_ids)
    ]


def recommend(
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file.",
    ),
    data: Path | None = typer.Option(
        None,
        "--data",
        "-d",
        help="JSON file with orders and orderItems; defaults to the persistence service.",
    ),
    user: int | None = typer.Option(
        None,
        "--user",
        "-u",
        help="User id to recommend for.",
    ),
    items: list[int] | None = typer.Option(
        None,
        "--item",
        "-i",
        help="Product id currently in the cart (repeatable).",
    ),
    algorithm: str | None = typer.Option(
        None,
        "--algorithm",
        "-a",
        help="Override the configured algorithm name.",
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="Loguru level."),
) -> None:
    setup_logging(log_level)

    app_config = load_config(AppConfig, config) if config is not None else AppConfig()
    provider: ConfigProvider = AppConfigProvider(app_config)
    if algorithm is not None:
        provider = MappingConfigProvider({ALGORITHM_ENV: algorithm})

    selector = RecommenderSelector(
        provider,
        max_recommendations=app_config.recommender.max_recommendations,
    )

    try:
        if data is not None:
            order_items, orders = load_training_data(data)
        elif app_config.persistence is not None:
            order_items, orders = fetch_training_data(app_config.persistence)
        else:
            raise typer.BadParameter("Either --data or a [persistence] config section is required.", param_hint="data")
        retrain(selector, order_items, orders, max_time=app_config.training.max_order_time)
    except (FileNotFoundError, ValueError, PersistenceError) as exc:
        logger.error("Training failed: {}", exc)
        raise typer.Exit(code=1) from exc

    try:
        recommended = selector.recommend_products(user, _cart(items or []))
    except NotTrainedError as exc:
        logger.error("Recommendation failed: {}", exc)
        raise typer.Exit(code=1) from exc

    if not recommended:
        logger.warning("No recommendations produced.")
        return

    for product_id in recommended:
        typer.echo(product_id)


__all__ = ["recommend"]
