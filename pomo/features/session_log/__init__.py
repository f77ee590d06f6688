"""Session log formatting and daily totals"""
