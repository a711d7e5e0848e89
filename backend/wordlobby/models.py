from wordlobby import db


class Document(db.Model):
    """One JSON document addressed by a slash-separated path.

    ``version`` increases on every committed write and is what transactions
    compare against to detect a concurrent writer.
    """
    __tablename__ = 'document'
    path = db.Column(db.String(255), primary_key=True)
    value = db.Column(db.JSON, nullable=False)
    version = db.Column(db.Integer, nullable=False, default=1)

    def to_dict(self):
        return {
            'path': self.path,
            'value': self.value,
            'version': self.version,
        }
