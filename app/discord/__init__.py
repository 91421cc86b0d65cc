"""Discord REST client, command definitions and request verification"""
