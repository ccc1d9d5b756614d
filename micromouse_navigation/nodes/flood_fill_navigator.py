import rclpy
from rclpy.exceptions import InvalidParameterTypeException
from rclpy.logging import get_logger
from rclpy.node import Node
from geometry_msgs.msg import Twist
from nav_msgs.msg import Odometry
from sensor_msgs.msg import LaserScan

from ..config.parameters import NavigationConfig
from ..core.drive_state_machine import NavigationOutcome
from ..core.exceptions import ConfigurationError
from ..core.navigation_loop import NavigationLoop
from ..utils.pose_tracker import yaw_from_quaternion


class FloodFillNavigator(Node):
    """Solves the maze by flood fill, one cell at a time"""

    def __init__(self, **kwargs):
        super().__init__('flood_fill', **kwargs)

        self.declare_parameter('odom_topic', '/odom')
        self.declare_parameter('scan_topic', '/laser_controller/out')
        self.declare_parameter('cmd_vel_topic', '/cmd_vel')
        self.config = self.load_config()

        # Raises ConfigurationError before any publisher exists
        self.loop = NavigationLoop(self.config, self.get_logger())

        self.setup_ros_interfaces()
        self.get_logger().info('Flood fill node initialized.')

    def load_config(self):
        """Build the navigation config from ROS parameters"""
        overrides = {}
        for name, default in NavigationConfig.defaults().items():
            try:
                self.declare_parameter(name, default)
            except InvalidParameterTypeException as e:
                raise ConfigurationError(f'Parameter {name}: {e}') from e
            value = self.get_parameter(name).value
            # Integer parameters given where floats are expected
            if isinstance(default, float) and isinstance(value, int):
                value = float(value)
            overrides[name] = value
        return NavigationConfig(**overrides)

    def setup_ros_interfaces(self):
        """Setup ROS2 publishers and subscribers"""
        odom_topic = self.get_parameter('odom_topic').value
        scan_topic = self.get_parameter('scan_topic').value
        cmd_vel_topic = self.get_parameter('cmd_vel_topic').value

        self.cmd_vel_pub = self.create_publisher(Twist, cmd_vel_topic, 10)
        self.laser_sub = self.create_subscription(LaserScan, scan_topic, self.laser_callback, 5)
        self.odom_sub = self.create_subscription(Odometry, odom_topic, self.odom_callback, 5)
        self.timer = self.create_timer(self.config.TICK_PERIOD, self.control_loop)

    def laser_callback(self, msg):
        self.loop.on_scan(msg.ranges, msg.range_min, msg.range_max)

    def odom_callback(self, msg):
        position = msg.pose.pose.position
        q = msg.pose.pose.orientation
        self.loop.on_pose(position.x, position.y, yaw_from_quaternion(q.x, q.y, q.z, q.w))

    @property
    def finished(self):
        return self.loop.finished

    def control_loop(self):
        """Publish exactly one velocity command per tick"""
        if self.loop.finished:
            return

        if not self.loop.is_ready():
            self.get_logger().warn('Waiting for odometry and range data', throttle_duration_sec=5.0)

        command = self.loop.tick()
        self.publish_command(command.linear, command.angular)

        if self.loop.finished:
            self.timer.cancel()
            self.report_outcome()
            return

        pose = self.loop.pose
        if pose is not None:
            self.get_logger().info(
                f'State: {self.loop.state.mode.value} | '
                f'Pose: ({pose.x:.2f}, {pose.y:.2f}, {pose.yaw:.3f}) | '
                f'Cell distance: {self.loop.state.distance_traveled_this_cell:.2f}',
                throttle_duration_sec=1.0
            )

    def publish_command(self, linear, angular):
        twist = Twist()
        twist.linear.x = float(linear)
        twist.angular.z = float(angular)
        self.cmd_vel_pub.publish(twist)

    def stop(self):
        self.publish_command(0.0, 0.0)

    def report_outcome(self):
        if self.loop.outcome == NavigationOutcome.GOAL_REACHED:
            self.get_logger().info(f'Goal reached! {self.loop.tick_count} ticks.')
        else:
            self.get_logger().error(f'Navigation failed: {self.loop.failure}')


def main(args=None):
    """Main entry point"""
    rclpy.init(args=args)

    try:
        navigator = FloodFillNavigator()
    except ConfigurationError as e:
        get_logger('flood_fill').fatal(f'Configuration rejected: {e}')
        rclpy.shutdown()
        raise SystemExit(1)

    try:
        while rclpy.ok() and not navigator.finished:
            rclpy.spin_once(navigator, timeout_sec=0.1)
    except KeyboardInterrupt:
        navigator.get_logger().info('Shutting down flood fill navigator...')
    finally:
        if rclpy.ok():
            # Stop the robot before shutting down
            navigator.stop()
            navigator.destroy_node()
            rclpy.shutdown()

    if navigator.loop.outcome == NavigationOutcome.NAVIGATION_FAILED:
        raise SystemExit(2)


if __name__ == '__main__':
    main()
