"""Pomodoro timer state machine"""
