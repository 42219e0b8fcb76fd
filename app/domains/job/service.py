"""Job service: tenant-scoped access to jobs, orders and deliverable files."""

import logging
import secrets
from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domains.folder.service import FolderService
from app.domains.settings.service import SettingsService
from app.exceptions.base import NotFoundError, ValidationError
from app.exceptions.delivery import AuthorizationError
from app.schemas.job import FileCreate, JobCreate, OrderCreate
from app.shared import folder_path as fp
from app.shared.pagination import Page, PaginationParams, paginate
from models import Customer, DeliverableFile, Job, Order, User

logger = logging.getLogger(__name__)


class JobService:
    """Service class for jobs, their orders and registered files."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Access control
    @staticmethod
    def require_manager(user: User) -> None:
        """Only partner owners and admins may change deliveries.

        Raises:
            AuthorizationError: For photographers, editors and unknown roles.
        """
        if not user.can_manage_deliveries:
            raise AuthorizationError(details={"role": user.role})

    async def get_job_for_user(self, job_id: UUID, user: User) -> Job:
        """Load a job of the user's tenant.

        Jobs of other tenants are reported as missing so their existence
        does not leak.
        """
        stmt = (
            select(Job)
            .options(selectinload(Job.customer))
            .where(and_(Job.id == job_id, Job.partner_id == user.partner_id))
        )
        result = await self.db.execute(stmt)
        job = result.scalar_one_or_none()
        if job is None:
            raise NotFoundError("Job not found")
        return job

    async def get_order_for_user(self, order_id: UUID, user: User) -> Order:
        stmt = select(Order).where(
            and_(Order.id == order_id, Order.partner_id == user.partner_id)
        )
        result = await self.db.execute(stmt)
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundError("Order not found")
        return order

    # Jobs
    async def create_job(self, job_data: JobCreate, user: User) -> Job:
        if job_data.customer_id is not None:
            customer = await self.db.get(Customer, job_data.customer_id)
            if customer is None or customer.partner_id != user.partner_id:
                raise NotFoundError("Customer not found")

        job = Job(
            partner_id=user.partner_id,
            job_number=self._generate_number("JOB"),
            customer_id=job_data.customer_id,
            address=job_data.address,
            status=job_data.status.value,
            notes=job_data.notes,
        )

        try:
            self.db.add(job)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to create job: {str(e)}") from e

        logger.info("Created job %s for partner %s", job.job_number, user.partner_id)
        return await self.get_job_for_user(job.id, user)

    async def list_jobs(self, user: User, pagination: PaginationParams) -> Page:
        query = (
            select(Job)
            .where(Job.partner_id == user.partner_id)
            .order_by(Job.created_at.desc(), Job.id)
        )
        return await paginate(self.db, query, pagination)

    # Orders
    async def create_order(self, job: Job, order_data: OrderCreate, user: User) -> Order:
        """Create an order for ``job``.

        Without an explicit value the revision allowance comes from the
        partner's settings.
        """
        max_rounds = order_data.max_revision_rounds
        if max_rounds is None:
            max_rounds = await SettingsService(self.db).get_default_max_revision_rounds(
                job.partner_id
            )

        order = Order(
            partner_id=job.partner_id,
            order_number=self._generate_number("ORD"),
            job_id=job.id,
            max_revision_rounds=max_rounds,
            used_revision_rounds=0,
        )

        try:
            self.db.add(order)
            await self.db.commit()
            await self.db.refresh(order)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to create order: {str(e)}") from e

        logger.info(
            "Created order %s for job %s (%d revision rounds) by %s",
            order.order_number,
            job.job_number,
            max_rounds,
            user.id,
        )
        return order

    async def list_orders(self, job_id: UUID) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.job_id == job_id)
            .order_by(Order.created_at, Order.order_number)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    # Files
    async def register_file(self, job: Job, file_data: FileCreate) -> DeliverableFile:
        """Record a file handed over by the storage collaborator.

        A folder path that does not exist yet is materialised together with
        its missing ancestors.
        """
        order = await self.db.get(Order, file_data.order_id)
        if order is None or order.job_id != job.id:
            raise NotFoundError("Order not found", details={"order_id": str(file_data.order_id)})

        folder_path = None
        if file_data.folder_path is not None:
            folder_path = fp.normalize(file_data.folder_path)

        try:
            if folder_path is not None:
                await FolderService(self.db).ensure_path(job.id, folder_path)

            file = DeliverableFile(
                job_id=job.id,
                order_id=order.id,
                folder_path=folder_path,
                file_name=file_data.file_name,
                original_name=file_data.original_name,
                file_size=file_data.file_size,
                mime_type=file_data.mime_type,
                download_url=file_data.download_url,
                uploaded_at=file_data.uploaded_at or datetime.utcnow(),
                notes=file_data.notes,
            )
            self.db.add(file)
            await self.db.commit()
            await self.db.refresh(file)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to register file: {str(e)}") from e

        logger.info("Registered file %s in job %s at %r", file.id, job.job_number, folder_path)
        return file

    async def list_files(self, job_id: UUID) -> list[DeliverableFile]:
        stmt = (
            select(DeliverableFile)
            .where(DeliverableFile.job_id == job_id)
            .order_by(DeliverableFile.uploaded_at, DeliverableFile.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_file(self, job_id: UUID, file_id: UUID) -> DeliverableFile:
        stmt = select(DeliverableFile).where(
            and_(DeliverableFile.id == file_id, DeliverableFile.job_id == job_id)
        )
        result = await self.db.execute(stmt)
        file = result.scalar_one_or_none()
        if file is None:
            raise NotFoundError("File not found")
        return file

    async def update_file_notes(self, job_id: UUID, file_id: UUID, notes: str | None) -> DeliverableFile:
        """Notes are the only mutable part of a registered file."""
        file = await self.get_file(job_id, file_id)
        file.notes = notes.strip() if notes and notes.strip() else None

        try:
            await self.db.commit()
            await self.db.refresh(file)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to update file notes: {str(e)}") from e
        return file

    @staticmethod
    def _generate_number(prefix: str) -> str:
        return f"{prefix}-{secrets.token_hex(4).upper()}"
