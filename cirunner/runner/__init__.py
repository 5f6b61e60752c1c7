from .plan import build_plan
from .executor import run_command
from .run_report import RunReport

__all__ = ["build_plan", "run_command", "RunReport"]
