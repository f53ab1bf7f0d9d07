from .summary_md import render_run_summary, render_task_list

__all__ = ["render_run_summary", "render_task_list"]
