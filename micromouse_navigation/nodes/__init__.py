"""
ROS2 Node implementations

Nodes import rclpy, so they are loaded on demand rather than from here.
"""
