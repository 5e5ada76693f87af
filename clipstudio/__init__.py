"""Clip Studio prompt and payload construction"""
