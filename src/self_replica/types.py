"""Core type definitions"""

from enum import Enum

ReplicaState = Enum('ReplicaState', ['ACTIVE', 'RELEASED'])
