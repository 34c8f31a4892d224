"""Default file templates written by `regexsolve init`."""

DEFAULT_CONFIG_YAML = """\
# RegexSolve configuration
#
# Time budget in seconds for each engine call. A match that runs longer is
# reported with the "infinite" error id. Set to null to disable.
match_timeout: 5.0

# Decimal places kept in reported elapsed times.
time_precision: 4

# Maximum number of samples accepted in one "tests" request. null means no limit.
max_tests: null
"""
