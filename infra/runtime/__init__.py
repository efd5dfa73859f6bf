from .signal_interrupt_hook import SignalInterruptHook
from .structured_logger import StructuredLogger
from .system_clock import SystemClock

__all__ = ["SignalInterruptHook", "StructuredLogger", "SystemClock"]
