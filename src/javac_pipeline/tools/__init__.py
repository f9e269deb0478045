from .process import ProcessResult, ToolRunner, run_tool

__all__ = ["ProcessResult", "ToolRunner", "run_tool"]
