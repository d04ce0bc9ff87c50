"""Command-line interface modules for delta model pipeline execution.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from deltagam.cli.run_delta import run_delta_pipeline, load_user_config_dict

__all__ = ['run_delta_pipeline', 'load_user_config_dict']
