"""
Job list loading with batched detail enrichment.
"""
from typing import List, Optional

from ..api.client import AdminApiClient
from ..config import settings
from ..logging_config import setup_logging
from ..models.jobs import JobPosting, adapt_job, merge_job_detail
from ..utils.batching import gather_in_batches
from ..utils.cancellation import CancellationToken

# Create module-specific logger
logger = setup_logging("job_service")


class JobService:
    """Fetches postings from the remote API and adapts them for the board."""

    def __init__(self, client: AdminApiClient, batch_size: Optional[int] = None):
        self.client = client
        self.batch_size = batch_size or settings.detail_batch_size

    async def load_jobs(self, cancel: Optional[CancellationToken] = None) -> List[JobPosting]:
        """
        Load every posting and enrich it with its detail record.

        Detail requests run in windows of ``batch_size``; a failed detail
        leaves the list item as it was.

        Args:
            cancel: Token that abandons the load

        Returns:
            List[JobPosting]: postings in server order
        """
        raw_jobs = await self.client.list_job_posts(cancel)
        jobs = [adapt_job(raw) for raw in raw_jobs]
        ids = [job.id for job in jobs if job.id]

        async def fetch(job_id: str):
            return await self.client.get_job_post(job_id, cancel)

        details = await gather_in_batches(ids, fetch, self.batch_size)
        enriched = []
        for job in jobs:
            detail = details.get(job.id)
            enriched.append(merge_job_detail(job, detail) if detail else job)

        logger.info("Loaded job postings", extra={
            "job_count": len(enriched),
            "detail_count": sum(1 for value in details.values() if value),
        })
        return enriched
