"""
SSR command line: tree, search and replace over files and directories
"""
