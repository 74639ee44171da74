"""HTTP transport for stay search"""
