from yorisoi.repositories.job_repository import ObjectStoreJobRepository

__all__ = ["ObjectStoreJobRepository"]
