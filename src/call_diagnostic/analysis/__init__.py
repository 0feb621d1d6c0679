"""
Call-log analysis: classification, callback latency and loss aggregation
"""

from .models import AnalysisResult, CallRecord, ClassifiedCall, CallDirection, UNKNOWN_CALLER
from .classifier import BusinessHours, classify_calls, classify_record
from .callback import average_callback_minutes, callback_observations, group_by_caller
from .aggregator import aggregate, month_label

__all__ = [
    'AnalysisResult',
    'CallRecord',
    'ClassifiedCall',
    'CallDirection',
    'UNKNOWN_CALLER',
    'BusinessHours',
    'classify_calls',
    'classify_record',
    'average_callback_minutes',
    'callback_observations',
    'group_by_caller',
    'aggregate',
    'month_label'
]
