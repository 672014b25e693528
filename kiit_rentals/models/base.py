from sqlalchemy.orm import declarative_base

# Shared by users and products so one create_all builds every table
Base = declarative_base()
