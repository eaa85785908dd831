from flask import Flask, render_template, request, jsonify
from structsim.compare import compare_sources, compare_source_hierarchies
from structsim.config import load_config

app = Flask(__name__)

@app.route('/')
def index():
    return render_template('index.html')

@app.route('/compare', methods=['POST'])
def compare():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "expected a JSON object with code_a and code_b"}), 400
    code_a = data.get('code_a', '')
    code_b = data.get('code_b', '')
    mode = data.get('mode', 'basic') # 'basic' or 'hierarchy'

    config = load_config(None)
    if data.get('method'):
        config["compare"]["method"] = data['method']

    try:
        if mode == 'hierarchy':
            report = compare_source_hierarchies(code_a, code_b, config)
        else:
            report = compare_sources(code_a, code_b, config)
        return jsonify(report)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        return jsonify({"error": str(e)}), 500

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0')
