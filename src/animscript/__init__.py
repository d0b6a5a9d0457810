"""
animscript — runtime for ckb keyboard animation scripts

Scripts are standalone executables: queried once with --ckb-info for their
metadata, then run with --ckb-run and driven over stdin/stdout one frame
at a time.
"""

__version__ = "0.1.0"
