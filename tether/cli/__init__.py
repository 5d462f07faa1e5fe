"""
CLI Module - The `tether` command.
"""
