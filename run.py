# run.py
import logging

from dotenv import load_dotenv

load_dotenv()

from vetclinic import create_app  # noqa: E402

app = create_app()
logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
