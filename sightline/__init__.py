"""Line-of-sight calculator for a grid-based tactical board game."""
