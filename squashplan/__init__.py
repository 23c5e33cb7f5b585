"""
squashplan: round-robin schedules for squash sessions, with a small API around them.
"""
