from voicetime.infrastructure.sinks.api import ApiReportSink

__all__ = ["ApiReportSink"]
