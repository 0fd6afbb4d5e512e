"""Services for the recommendation pipeline and external integrations."""

from happiness.services.completion_client import default_completion_client
from happiness.services import context_assembler, entry_pipeline

__all__ = ["default_completion_client", "context_assembler", "entry_pipeline"]
