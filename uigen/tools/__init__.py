"""Tool invocation engine: command parsing, handlers and dispatch"""
