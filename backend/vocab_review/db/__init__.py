from pathlib import Path

from vocab_review.db.sqlite import init_sqlite


async def init_all_databases(data_dir: Path) -> Path:
    data_dir.mkdir(parents=True, exist_ok=True)
    return await init_sqlite(data_dir)
