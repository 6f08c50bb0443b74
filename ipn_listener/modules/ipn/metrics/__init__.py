# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/metrics/__init__.py
"""

from .prometheus_exporter import (
    CONTENT_TYPE_LATEST,
    observe_ipn_outcome,
    observe_ipn_received,
    observe_ipn_verification,
    observe_storage_failure,
    render_prometheus_metrics,
)

__all__ = [
    "CONTENT_TYPE_LATEST",
    "observe_ipn_outcome",
    "observe_ipn_received",
    "observe_ipn_verification",
    "observe_storage_failure",
    "render_prometheus_metrics",
]
