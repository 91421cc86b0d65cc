"""Persistence repositories"""
