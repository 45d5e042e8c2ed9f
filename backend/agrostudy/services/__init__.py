"""Domain services and external integrations."""

from agrostudy.services.pdf_processor import pdf_processor

__all__ = ["pdf_processor"]
