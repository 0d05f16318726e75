""" Logging configuration for olcontig.

You can override the settings in logging_config.py by copying the whole
file to logging_override.py in the same folder. The original settings
write diagnostics to standard error, so standard output stays free for
contigs.

For a detailed description of the settings, see the Python documentation:
https://docs.python.org/3/library/logging.config.html#logging-config-dictschema

Do not commit logging_override.py to source control.
"""

LOGGING = {
    'root': {'handlers': ['console'],
             'level': 'WARNING'},
    'loggers': {
        "olcontig": {"level": "INFO"},
    },

    # This lets you call logging.getLogger() before the configuration is done.
    'disable_existing_loggers': False,

    'version': 1,
    'formatters': {'basic': {
        'format': '%(asctime)s[%(levelname)s]%(name)s.%(funcName)s(): %(message)s',
        'datefmt': '%Y-%m-%d %H:%M:%S'}},
    'handlers': {'console': {'class': 'logging.StreamHandler',
                             'stream': 'ext://sys.stderr',
                             'level': 'DEBUG',
                             'formatter': 'basic'}},
}
