"""Field rule evaluation against fetched documents."""

from feedsmith.core.extraction.document import DocumentContext
from feedsmith.core.extraction.evaluator import ContentFieldsEvaluator, FieldEvaluator
from feedsmith.core.extraction.summary import format_summary

__all__ = ['ContentFieldsEvaluator', 'DocumentContext', 'FieldEvaluator', 'format_summary']
