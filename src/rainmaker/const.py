# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Protocol constants for the RainMaker sprinkler controller."""

# Envelope
FIELD_TYPE = "type"

# Requests (frontend -> controller)
MSG_PING = "ping"
MSG_TIME_UPDATE = "time_update"
MSG_WIFI_SCAN = "wifi_scan"
MSG_WIFI_STATUS = "wifi_status"
MSG_WIFI_CONNECT = "wifi_connect"
MSG_WIFI_DISCONNECT = "wifi_disconnect"
MSG_GET_SYSTEM_INFO = "get_system_info"
MSG_CREATE_OR_UPDATE_ZONE = "create_or_update_zone"
MSG_DELETE_ZONE = "delete_zone"
MSG_GET_ZONES = "get_zones"
MSG_GET_PROGRAMS = "get_programs"
MSG_CREATE_OR_UPDATE_PROGRAM = "create_or_update_program"
MSG_DELETE_PROGRAM = "delete_program"
MSG_TEST_MANUAL = "test_manual"
MSG_ENABLE = "enable"
MSG_GET_SETTINGS = "get_settings"

# Responses (controller -> frontend)
MSG_PONG = "pong"
MSG_TIME_UPDATE_RESPONSE = "time_update_response"
MSG_WIFI_LIST = "wifi_list"
MSG_SYSTEM_INFO = "system_info"
MSG_ZONE_LIST = "zone_list"
MSG_PROGRAM_LIST = "program_list"
MSG_SETTINGS = "settings"
MSG_ERROR = "error"

# Request fields
FIELD_PASSWORD = "password"
FIELD_ZONE_ID = "zone_id"
FIELD_PROGRAM_ID = "program_id"
FIELD_IS_ENABLED = "is_enabled"
FIELD_NAME = "name"
FIELD_OUTPUT = "output"

# Response fields
FIELD_MESSAGE = "message"
FIELD_SUCCESS = "success"
FIELD_CURRENT_TIME = "current_time"
FIELD_FORMATTED_TIME = "formatted_time"
FIELD_NETWORKS = "networks"
FIELD_STATUS = "status"
FIELD_SETTINGS = "settings"
FIELD_ZONES = "zones"
FIELD_PROGRAMS = "programs"

# Password accepted by the mock access point
WIFI_PASSWORD = "password"

# Error messages
ERROR_PASSWORD_INCORRECT = "Password incorrect"
ERROR_CANT_DELETE_ZONES = "This demo can't delete zones"
ERROR_CANT_MODIFY_PROGRAMS = "This demo can't modify programs"
ERROR_CANT_DELETE_PROGRAMS = "This demo can't delete programs"
ERROR_CANT_RUN_PROGRAMS = "This demo can't run programs"

# Wifi modes
WIFI_MODE_AP_STA = "AP+STA"
WIFI_MODE_STA = "STA"

# Zone statuses
ZONE_STATUS_IDLE = "idle"
ZONE_STATUS_RUNNING = "running"
ZONE_STATUS_DISABLED = "disabled"

# Program statuses
PROGRAM_STATUS_SCHEDULED = "scheduled"
PROGRAM_STATUS_RUNNING = "running"

# Wifi scan
WIFI_SCAN_NAMES = (
    "Mock_Network",
    "Test_AP",
    "ESP32",
    "OfficeNet",
    "CafeWiFi",
    "IoTNet",
)
WIFI_SCAN_MIN_NETWORKS = 3
WIFI_SCAN_MAX_NETWORKS = 6
WIFI_SCAN_SECURE_COUNT = 3
WIFI_SCAN_RSSI_MIN = -89
WIFI_SCAN_RSSI_MAX = -30

# Range for freshly generated zone ids (upper bound exclusive)
ZONE_ID_MIN = 1
ZONE_ID_MAX = 100

# Default listener port
DEFAULT_PORT = 8080
