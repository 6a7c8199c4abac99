"""SQLite database for deployments."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    Enum,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    sessionmaker,
)

from vpc_api.models import DeploymentStatus
from vpc_api.settings import settings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class DeploymentRecord(Base):
    """Database model for deployments."""

    __tablename__ = "deployments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    environment: Mapped[str] = mapped_column(String(20), nullable=False)
    stack_name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    aws_region: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[DeploymentStatus] = mapped_column(
        Enum(DeploymentStatus), nullable=False, default=DeploymentStatus.PENDING
    )
    pulumi_deployment_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    outputs: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=_utcnow, onupdate=_utcnow
    )


class Database:
    """Deployment bookkeeping. One row per Pulumi stack."""

    def __init__(self, database_url: Optional[str] = None):
        self.engine = create_engine(database_url or settings.database_url, echo=False)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        return self.SessionLocal()

    @staticmethod
    def _find(session: Session, stack_name: str) -> Optional[DeploymentRecord]:
        return session.query(DeploymentRecord).filter_by(stack_name=stack_name).first()

    def create_deployment(self, project: str, environment: str, aws_region: str) -> DeploymentRecord:
        """Record a new pending deployment.

        Raises:
            ValueError: If the stack already has a record.
        """
        stack_name = settings.stack_name(project, environment)

        with self.get_session() as session:
            if self._find(session, stack_name):
                raise ValueError(f"Deployment {stack_name} already exists")

            record = DeploymentRecord(
                project=project,
                environment=environment,
                stack_name=stack_name,
                aws_region=aws_region,
                status=DeploymentStatus.PENDING,
            )
            session.add(record)
            session.commit()
            session.refresh(record)
            return record

    def get_deployment(self, project: str, environment: str) -> Optional[DeploymentRecord]:
        with self.get_session() as session:
            return self._find(session, settings.stack_name(project, environment))

    def update_deployment_status(
        self,
        stack_name: str,
        status: DeploymentStatus,
        pulumi_deployment_id: Optional[str] = None,
        outputs: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> Optional[DeploymentRecord]:
        """Move a deployment to ``status``; other fields change only when given."""
        with self.get_session() as session:
            record = self._find(session, stack_name)
            if not record:
                return None

            record.status = status
            record.updated_at = _utcnow()
            if pulumi_deployment_id:
                record.pulumi_deployment_id = pulumi_deployment_id
            if outputs:
                record.outputs = outputs
            if error_message:
                record.error_message = error_message

            session.commit()
            session.refresh(record)
            return record

    def list_deployments(self, project: Optional[str] = None) -> list[DeploymentRecord]:
        with self.get_session() as session:
            query = session.query(DeploymentRecord).order_by(DeploymentRecord.stack_name)
            if project:
                query = query.filter_by(project=project)
            return query.all()

    def delete_deployment(self, stack_name: str) -> bool:
        with self.get_session() as session:
            record = self._find(session, stack_name)
            if not record:
                return False
            session.delete(record)
            session.commit()
            return True


# Global database instance
db = Database()
