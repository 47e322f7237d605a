"""
flatc4 command line interface.
"""
