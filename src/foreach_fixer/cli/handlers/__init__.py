from .check import handle_check
from .fix import handle_fix, _fix_single_file, _print_batch_summary
