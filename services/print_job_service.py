"""
services.print_job_service - Print attempt log.

Session management is the caller's responsibility, as elsewhere in
the services layer.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import PrintJob


class PrintJobService:

    @staticmethod
    def record(session: Session, reference_id: str, label_size: str,
               printer: str, error: str = "") -> PrintJob:
        """Add a job row; a non-empty *error* marks it as failed."""
        job = PrintJob(
            reference_id=reference_id,
            label_size=label_size,
            printer=printer,
            status=PrintJob.STATUS_FAILED if error else PrintJob.STATUS_PRINTED,
            error=error,
        )
        session.add(job)
        session.flush()
        return job

    @staticmethod
    def recent(session: Session, limit: int = 100,
               reference_id: str = "") -> list[PrintJob]:
        """Newest first, optionally for a single reference ID."""
        q = session.query(PrintJob)
        if reference_id:
            q = q.filter(PrintJob.reference_id == reference_id)
        return q.order_by(PrintJob.id.desc()).limit(limit).all()
