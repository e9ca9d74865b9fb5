# run.py
import os
from dotenv import load_dotenv

# 같은 디렉터리의 '.env'를 create_app 임포트 전에 로드해야 설정 클래스가 값을 읽습니다.
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(dotenv_path=os.path.join(basedir, '.env'))

from pawconnect import create_app  # noqa: E402

app = create_app()

if __name__ == '__main__':
    host = os.getenv('FLASK_RUN_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_RUN_PORT', 5000))
    debug = app.config.get('DEBUG', False)
    app.run(host=host, port=port, debug=debug)
