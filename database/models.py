from sqlalchemy import Column, Integer, String, Numeric, Date, Enum, UniqueConstraint
from database.database import Base
from models.category import Category

# Montants en décimal exact (jamais en float)
MONEY = Numeric(12, 2)


class IncomeModel(Base):
    __tablename__ = "income"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=False)
    date = Column(Date, index=True, nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class ExpenditureModel(Base):
    __tablename__ = "expenditure"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=False)
    category = Column(Enum(Category), index=True, nullable=False)
    date = Column(Date, index=True, nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class BudgetModel(Base):
    __tablename__ = "budget"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(MONEY, nullable=False)
    category = Column(Enum(Category), index=True, nullable=False)
    date = Column(Date, index=True, nullable=False)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class AssetModel(Base):
    __tablename__ = "asset"

    id = Column(Integer, primary_key=True, index=True)
    year = Column("year_value", Integer, index=True, nullable=False)
    month = Column("month_value", Integer, index=True, nullable=False)  # 1-12
    amount = Column(MONEY, nullable=False)
    comment = Column(String)


class LiabilityModel(Base):
    __tablename__ = "liability"

    id = Column(Integer, primary_key=True, index=True)
    year = Column("year_value", Integer, index=True, nullable=False)
    month = Column("month_value", Integer, index=True, nullable=False)  # 1-12
    amount = Column(MONEY, nullable=False)
    comment = Column(String)


class NetWorthModel(Base):
    __tablename__ = "net_worth"
    __table_args__ = (
        UniqueConstraint("year_value", "month_value", name="uq_net_worth_year_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    year = Column("year_value", Integer, nullable=False)
    month = Column("month_value", Integer, nullable=False)  # 1-12
    assets = Column(MONEY, nullable=False)
    liabilities = Column(MONEY, nullable=False)
