"""Built-in tools: the content editor and the file manager"""
