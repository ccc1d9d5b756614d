#!/usr/bin/env python3
"""
Launch file for the flood fill maze navigator
"""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description():
    return LaunchDescription([
        # Declare launch arguments
        DeclareLaunchArgument(
            'use_sim_time',
            default_value='true',
            description='Use simulation time'
        ),

        DeclareLaunchArgument(
            'maze_size',
            default_value='20',
            description='Cells per maze side'
        ),

        DeclareLaunchArgument(
            'goal_col',
            default_value='19',
            description='Goal cell column'
        ),

        DeclareLaunchArgument(
            'goal_row',
            default_value='19',
            description='Goal cell row'
        ),

        DeclareLaunchArgument(
            'log_level',
            default_value='info',
            description='Logging level'
        ),

        Node(
            package='micromouse_navigation',
            executable='flood_fill_navigator',
            name='flood_fill',
            output='screen',
            parameters=[{
                'use_sim_time': LaunchConfiguration('use_sim_time'),
                'maze_size': LaunchConfiguration('maze_size'),
                'goal_col': LaunchConfiguration('goal_col'),
                'goal_row': LaunchConfiguration('goal_row'),
            }],
            arguments=['--ros-args', '--log-level', LaunchConfiguration('log_level')],
            remappings=[
                ('/cmd_vel', '/cmd_vel'),
                ('/odom', '/odom'),
                ('/laser_controller/out', '/laser_controller/out'),
            ]
        ),
    ])
