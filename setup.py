import os
from glob import glob

from setuptools import setup

package_name = 'micromouse_navigation'

setup(
    name=package_name,
    version='0.1.0',
    packages=[package_name, f'{package_name}.nodes', f'{package_name}.config',
              f'{package_name}.core', f'{package_name}.utils'],
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        (os.path.join('share', package_name, 'launch'), glob('launch/*.launch.py')),
    ],
    install_requires=['setuptools', 'numpy'],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='ty',
    maintainer_email='ty@example.com',
    description='Flood-fill maze navigation for a differential drive micromouse',
    license='Apache License 2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'flood_fill_navigator = micromouse_navigation.nodes.flood_fill_navigator:main',
        ],
    },
)
