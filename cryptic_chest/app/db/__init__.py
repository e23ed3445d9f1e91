import logging

logger = logging.getLogger(__name__)


async def init_models(drop: bool = False) -> None:
    """Create (optionally recreate) every table registered on Base."""
    from cryptic_chest.app.db.base import Base, engine
    # Register models on Base.metadata
    from cryptic_chest.app import models  # noqa: F401

    try:
        async with engine.begin() as conn:
            if drop:
                logger.warning("Dropping all tables")
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables ready")
    except Exception as e:
        logger.error("Could not create tables: %s", e)
        raise
