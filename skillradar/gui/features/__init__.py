# skillradar/gui/features - panels hosted by SkillRadarApp
#
# Each panel talks to the core only through a Session.
