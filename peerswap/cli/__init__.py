"""
PeerSwap command-line tools.
"""
