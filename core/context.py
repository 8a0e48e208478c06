from dataclasses import dataclass
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from core.config import Settings
from core.database import create_db_engine, create_session_factory
from services.token_service import TokenService


@dataclass
class AppContext:
    """
    Everything a request needs that outlives the request.

    Built once by create_app() and kept on app.state.context; handlers
    reach it through the dependencies in utils.deps.
    """
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    token_service: TokenService

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        engine = create_db_engine(settings)

        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            token_service=TokenService(settings.SECRET_KEY, algorithm=settings.ALGORITHM),
        )

    def close(self) -> None:
        self.engine.dispose()
