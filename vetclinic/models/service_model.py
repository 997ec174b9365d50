from vetclinic import db


class Service(db.Model):
    __tablename__ = 'service'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.String(300))
    price = db.Column(db.Float, nullable=False, default=0)
    duration = db.Column(db.Integer, nullable=False, default=30)  # minutes
    appointments = db.relationship('Appointment', backref='service', lazy=True)

    def __repr__(self):
        return f'<Service {self.name}>'
