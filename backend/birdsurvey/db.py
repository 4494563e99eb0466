# backend/birdsurvey/db.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from pathlib import Path

from birdsurvey.config import get_settings
from birdsurvey.logging_utils import get_logger

# モデル定義側の Base（birdsurvey.models.base）を利用してメタデータを統一
from birdsurvey.models.base import Base

LOGGER = get_logger(__name__)

# 1) BIRDSURVEY_DATABASE_URL が指定されていれば優先（例: postgresql+psycopg://...）
# 2) それ以外は SQLite を使用
_database_url_env = get_settings().database_url
_sqlite_path = None
if _database_url_env:
    SQLALCHEMY_DATABASE_URL = _database_url_env
    _is_sqlite = SQLALCHEMY_DATABASE_URL.startswith("sqlite")
else:
    _container_data = Path("/app/data")
    if _container_data.exists():
        _sqlite_path = _container_data / "app.db"
    else:
        # backend/birdsurvey/db.py → ../.. = <repo root>
        repo_root = Path(__file__).resolve().parents[2]
        _sqlite_path = repo_root / "data" / "app.db"
    SQLALCHEMY_DATABASE_URL = f"sqlite:///{_sqlite_path}"
    _is_sqlite = True

_connect_args = {"check_same_thread": False} if _is_sqlite else {}


def enable_sqlite_foreign_keys(bind) -> None:
    """Turn on FOREIGN KEY enforcement for every new SQLite connection."""
    # SQLite は接続ごとに既定で外部キー無効
    @event.listens_for(bind, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=_connect_args,
)
if _is_sqlite:
    enable_sqlite_foreign_keys(engine)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 既存DBに後から追加したカラム: (table, column, DDL type)
_ADDED_COLUMNS = (
    ("surveys", "prep_time_hours", "INTEGER"),
    ("surveys", "end_temperature", "INTEGER"),
    ("observations", "bin3", "INTEGER"),
    ("observations", "chicks_present", "BOOLEAN"),
    ("observations", "nest_present", "BOOLEAN"),
    ("observations", "fledgling_present", "BOOLEAN"),
)


def init_db(bind=None) -> None:
    bind = bind or engine
    if _sqlite_path is not None and bind is engine:
        # ディレクトリ作成（存在しない場合）
        _sqlite_path.parent.mkdir(parents=True, exist_ok=True)

    # パッケージ配下の各モデルモジュールを明示 import してメタデータ登録を確実化
    import birdsurvey.models.location  # noqa: F401
    import birdsurvey.models.observation  # noqa: F401
    import birdsurvey.models.disturbance  # noqa: F401
    import birdsurvey.models.survey  # noqa: F401
    Base.metadata.create_all(bind=bind)

    if bind.dialect.name == "sqlite":
        upgrade_sqlite_schema(bind)


def upgrade_sqlite_schema(bind) -> list[str]:
    """Add columns that older SQLite databases are missing.

    SQLite の簡易マイグレーション。create_all は既存テーブルを変更しないため、
    不足カラムだけ ALTER TABLE で追加する。追加したカラム名を返す。
    """
    added: list[str] = []
    with bind.begin() as conn:
        for table, column, ddl_type in _ADDED_COLUMNS:
            cols = conn.exec_driver_sql(f"PRAGMA table_info({table})").fetchall()
            names = {row[1] for row in cols}
            if column not in names:
                conn.exec_driver_sql(f"ALTER TABLE {table} ADD COLUMN {column} {ddl_type}")
                added.append(f"{table}.{column}")
    if added:
        LOGGER.info("Added missing columns: %s", ", ".join(added))
    return added


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
