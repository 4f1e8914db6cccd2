"""
schedgraph command line interface
"""
