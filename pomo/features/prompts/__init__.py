"""Confirmation prompts"""
