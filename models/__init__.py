from models.base import Base

from models.user import User
from models.flood_report import FloodReport
from models.sos_request import SOSRequest
from models.shelter import Shelter
from models.comment import Comment
