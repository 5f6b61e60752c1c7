__title__ = "cirunner"
__description__ = (
    "Run the flag-gated formatting, check, lint and test steps of a CI job "
    "and verify that the lockfile was left untouched."
)
__url__ = "https://github.com/cirunner/cirunner"
__version__ = "1.0.0"
__license__ = "GPLv3"
__intro__ = "cirunner: fail-fast CI gate"
